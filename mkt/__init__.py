"""Release tooling for the Salesforce marketplace repository."""

__version__ = "0.1.0"
