from toolgate.cli import cli

cli()
