"""Producer role: split a document into sections and publish them."""
