from .media_storage import MediaStorage, AUDIO_DIR, IMAGE_DIR
