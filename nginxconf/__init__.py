"""
nginxconf - Recurso declarativo para un archivo de configuración NGINX remoto

Gestiona Create/Read/Update/Delete/Import de un único .conf en un servidor
alcanzable solo por SSH.
"""

__version__ = "1.0.0"
