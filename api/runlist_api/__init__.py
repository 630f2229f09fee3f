"""Run List API: job run listing with cursor-based bidirectional pagination."""
