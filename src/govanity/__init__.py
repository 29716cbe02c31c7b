"""Go vanity import server with README landing pages."""
