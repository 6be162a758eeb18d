"""
Interface to the external equation-of-state model.
The EOS physics itself is NOT implemented in this package.
"""
