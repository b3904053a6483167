from persondb.main import cli

cli()
