"""Shared sample sources and a stand-in oracle for the test suite."""

import re
from pathlib import Path

from testctx.errors import ResolutionError

CALC_SOURCE = """package calc

import "fmt"

// Adds two numbers
func add(a, b int) int { return a + b }

// Multiplier scales values.
// It keeps a factor.
type Multiplier struct {
	factor int
}

// Scale multiplies v by the factor.
// Negative factors flip the sign.
func (m *Multiplier) Scale(v int) int {
	return v * m.factor
}

func main() {
	sum := add(3, 4)
	fmt.Println(sum)
	m := &Multiplier{factor: 2}
	m.Scale(sum)
	add(sum, 1)
}
"""

ADD_TEXT = "// Adds two numbers\nfunc add(a, b int) int { return a + b }"

SCALE_TEXT = (
    "// Scale multiplies v by the factor.\n"
    "// Negative factors flip the sign.\n"
    "func (m *Multiplier) Scale(v int) int {\n"
    "\treturn v * m.factor\n"
    "}"
)


class FakeOracle:
    """In-memory stand-in for gopls.

    Definitions are keyed by the identifier found at the queried position, so
    tests don't have to hard-code call-site columns.
    """

    def __init__(self, definitions=None, folding=None):
        self.definitions = definitions or {}
        self.folding = folding or {}
        self.definition_calls = []
        self.folding_calls = []
        self.terminated = False

    def definition(self, path, line, column):
        text = Path(path).read_text().splitlines()[line - 1]
        name = re.match(r"\w+", text[column - 1:]).group(0)
        self.definition_calls.append(name)
        if name not in self.definitions:
            raise ResolutionError(f"no identifier found for {name}")
        return self.definitions[name]

    def folding_ranges(self, path):
        self.folding_calls.append(path)
        if path not in self.folding:
            raise ResolutionError(f"no folding ranges for {path}")
        return self.folding[path]

    def terminate_all(self):
        self.terminated = True
