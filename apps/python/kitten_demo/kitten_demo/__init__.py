"""Demo application exercising the kitten repository against MongoDB."""
