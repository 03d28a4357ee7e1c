"""Logger configuration, file rotation, gzip compression and the rotating file writer."""