"""HTTP API: caching market-data proxy and remote history store."""
