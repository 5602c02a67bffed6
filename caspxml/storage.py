import os
import logging

from .constants import PACKAGE_EXTENSION

logger = logging.getLogger("CaspXml")


class StorageManager:
    def __init__(self, input_dir=None, output_dir=None):
        self.input_dir = os.path.abspath(input_dir or os.getcwd())
        self.output_dir = os.path.abspath(output_dir or os.getcwd())

    def ensure_directories(self):
        for d in [self.input_dir, self.output_dir]:
            if not os.path.exists(d):
                logger.info(f"Creating directory: {d}")
                os.makedirs(d)

    def list_packages(self):
        """Names of the .package files in the input folder, sorted case-insensitively"""
        files = [
            f for f in os.listdir(self.input_dir)
            if os.path.splitext(f)[1].lower() == PACKAGE_EXTENSION
            and os.path.isfile(os.path.join(self.input_dir, f))
        ]
        files.sort(key=lambda x: (x.lower(), x))
        return files

    def package_path(self, filename):
        return os.path.join(self.input_dir, filename)

    def write_document(self, document):
        path = os.path.join(self.output_dir, document.filename)
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(document.text)
        return path
