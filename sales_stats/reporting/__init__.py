"""
Text, structured (JSON) and tabular views of final tracker state.
"""
