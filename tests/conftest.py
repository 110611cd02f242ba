import os

os.environ.setdefault("AUTOAPPLY_NO_LOG_FILE", "1")
