"""
Codificación segura de contenido para interpolarlo en un único comando de shell
"""


def shell_escape(content: str) -> str:
    """
    Escapa contenido para ir dentro de comillas simples en un shell POSIX

    Dentro de '...' todo es literal (\\, `, $, ", saltos de línea) salvo la
    propia comilla simple, que se reemplaza por '\\'' : cierra la cadena,
    inserta una comilla escapada y vuelve a abrir.
    """
    return content.replace("'", "'\\''")


def single_quote(content: str) -> str:
    """Devuelve el contenido listo para usar como un argumento de shell: '<escapado>'."""
    return f"'{shell_escape(content)}'"
