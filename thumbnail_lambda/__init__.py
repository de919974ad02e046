"""S3 thumbnail pipeline: ObjectCreated events in, "<bucket>-thumbs" thumbnails out."""
