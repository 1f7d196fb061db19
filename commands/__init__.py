# commands package - admin commands that steer the dispatch engine
