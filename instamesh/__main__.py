from .cli import _cli

_cli()
