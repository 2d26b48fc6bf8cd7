"""Web — FastAPI front end for the analyzer."""
