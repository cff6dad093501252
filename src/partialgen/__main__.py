from partialgen.cli import app

app(prog_name="partialgen")
