# Routers package voor de site-API
