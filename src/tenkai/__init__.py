"""tenkai: version control for manuscripts, locally with git and remotely on GitHub."""
