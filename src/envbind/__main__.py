from envbind.cli import cli

cli()
