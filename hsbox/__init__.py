"""HeadshotBox local persistence: demo records, config and the schema ladder."""
