"""Remote image source: fetches images by URL or upload for the image-processing service."""
