"""Binding core: models, tag resolution, dispatch and the tree walker."""
