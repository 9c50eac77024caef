"""Smart Fill: segment autofill for travel itineraries.

The package turns a loosely typed "fill this segment for me" request
into a normalized suggestion looked up from flight, train and place
providers, caches it, and merges it into an editable segment form.
"""

__version__ = "0.1.0"
