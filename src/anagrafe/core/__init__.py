"""Pure domain and orchestration: normalization, search resolution, CRUD and cache."""
