from deployfeed.cli import cli

cli()
