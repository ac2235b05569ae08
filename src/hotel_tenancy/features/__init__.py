"""Feature packages for hotel-tenancy."""
