"""
CLI: compone comandos typer sobre core, transport y providers.
"""
