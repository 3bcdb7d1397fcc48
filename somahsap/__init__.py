# SOM Ahşap site backend
