"""
Generador del server block NGINX
"""


def render_server_block(server_name: str, listen_port: int, root: str) -> str:
    """
    Genera la configuración canónica de NGINX para un sitio estático

    El formato es fijo y estable byte a byte; los valores se pasan tal cual,
    sin validación.
    """
    return f"""server {{
\tlisten {listen_port};
\tserver_name {server_name};

\troot {root};
\tindex index.html;

\tlocation / {{
\t\ttry_files $uri $uri/ =404;
\t}}
}}"""
