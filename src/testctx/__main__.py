from testctx.cli import app

app(prog_name="testctx")
