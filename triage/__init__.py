"""Lead triage: validation, classification, routing and recovery."""
