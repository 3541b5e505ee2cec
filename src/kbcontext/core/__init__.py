"""Pure ranking, chunking, grouping and budgeting functions."""
