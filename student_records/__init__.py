"""Student records service: CRUD API with on-read photo normalization."""
