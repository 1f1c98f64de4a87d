"""
The MODEL layer contains pure data structures and business logic.
It has NO knowledge of the GUI (Qt).
It deals with the dimension chain, its stack-up, the callout layout and I/O.
"""
