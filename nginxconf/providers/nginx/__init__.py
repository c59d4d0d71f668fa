"""
Provider NGINX: renderizado del server block y controller del recurso .conf
"""

from nginxconf.providers.nginx.renderer import render_server_block
from nginxconf.providers.nginx.resource import NginxConfResource

__all__ = ["render_server_block", "NginxConfResource"]
