"""UI testing: framework core, page objects and live browser tests."""
