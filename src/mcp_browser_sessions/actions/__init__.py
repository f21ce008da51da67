"""Low-level Selenium helpers shared by the tool implementations."""
