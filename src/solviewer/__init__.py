"""SOL Editor: a viewer for Flash Local Shared Object (.sol) files."""
