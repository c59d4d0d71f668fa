"""
Punto de entrada: python -m nginxconf
"""

from nginxconf.cli.app import app

if __name__ == "__main__":
    app()
