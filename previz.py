import logging
import sys
from pathlib import Path

from PyQt5.QtWidgets import QApplication

from PV_Libs.constants import LOG_FORMAT, get_log_level
from PV_Libs.EditorUILib.editor_window import PreVizEditorWindow


def main() -> None:
    logging.basicConfig(level=get_log_level(), format=LOG_FORMAT)

    app = QApplication(sys.argv)
    window = PreVizEditorWindow()
    window.show()

    if len(sys.argv) > 1:
        window.load_image(Path(sys.argv[1]))
    else:
        window.prompt_upload()

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
