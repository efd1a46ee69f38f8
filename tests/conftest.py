import pytest

from helpers import CALC_SOURCE, FakeOracle


@pytest.fixture
def calc_file(tmp_path):
    """Write the sample Go file and return its path."""
    path = tmp_path / "calc.go"
    path.write_text(CALC_SOURCE)
    return path


@pytest.fixture
def calc_oracle(calc_file):
    """FakeOracle that resolves add and Scale in calc.go but not Println."""
    path = str(calc_file)
    return FakeOracle(
        definitions={
            "add": f"{path}:6:6-9: defined here as func add(a int, b int) int",
            "Scale": f"{path}:16:22-27: defined here as func (m *Multiplier) Scale(v int) int",
        },
        folding={
            path: "10:25-12:1\n16:27-16:33\n16:39-18:1\n20:13-26:1\n",
        },
    )
