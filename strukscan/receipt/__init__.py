"""Receipt text parsing: pure extractors over recognizer output."""
