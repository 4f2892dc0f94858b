"""Client side: REST API client, observable stores and the focus timer."""
