"""School administration API: schools, branches and departments."""
