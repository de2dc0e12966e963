"""git-lanes: commit graph lane layout for Git history viewers"""
