from recipe_pilot.cli import cli

cli()
