from erpauth.cli import run_cli

run_cli()
