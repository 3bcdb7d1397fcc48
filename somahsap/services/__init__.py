# Services package voor de site-API
