"""SignWeave sign-language translation backend."""
