"""
Learniverse terminal delivery: Rich panels, prompts and the word grid.
"""
