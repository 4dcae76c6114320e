"""Core world data model, tree traversal and identifier allocation."""
