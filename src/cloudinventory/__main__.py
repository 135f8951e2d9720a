from cloudinventory.cli import cli

cli()
