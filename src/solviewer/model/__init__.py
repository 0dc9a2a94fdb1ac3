"""
The MODEL layer contains pure data structures and the decoder adapter.
It has NO knowledge of the GUI (Qt).
It deals with Documents, load errors, messages and the application state.
"""
