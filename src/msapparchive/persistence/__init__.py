"""
The PERSISTENCE layer maps the model onto the entries of an .msapp zip archive.
It deals with entry addressing, payload codecs, and the load/save algorithms.
"""
