# -*- coding: utf-8 -*-

import locale
import os
import traceback
import tkinter as tk
from tkinter import ttk, filedialog, messagebox

# --- Imports für DOCX und PDF ---
try: import docx; HAS_DOCX = True
except ImportError: HAS_DOCX = False; print("Warning: 'python-docx' not found."); print("Install with: pip install python-docx")
try: from PyPDF2 import PdfReader; HAS_PYPDF2 = True
except ImportError: HAS_PYPDF2 = False; print("Warning: 'PyPDF2' not found."); print("Install with: pip install PyPDF2")

UNREADABLE_PAGE = "[Seite konnte nicht gelesen werden]"


def read_text_file(filepath):
    """
    Reads a plain text file: UTF-8 first, then the locale's encoding, then
    Latin-1, which accepts any byte sequence.
    """
    with open(filepath, 'rb') as f: data = f.read()
    for encoding in ('utf-8', locale.getpreferredencoding(False)):
        try: return data.decode(encoding)
        except (UnicodeDecodeError, LookupError): print(f"Decoding as {encoding} failed, trying next encoding...")
    return data.decode('latin-1')


def normalize_text(text):
    """Text as applied to the reader: surrounding whitespace stripped."""
    return text.strip() if isinstance(text, str) else ""


# --- Helper functions for text extraction ---
def extract_text_from_docx(filepath):
    """Extracts text from a .docx file."""
    if not HAS_DOCX: messagebox.showerror("Fehler", "'python-docx' ist nicht installiert."); return None
    try:
        doc = docx.Document(filepath)
        return '\n\n'.join(para.text for para in doc.paragraphs)
    except Exception as e: messagebox.showerror("DOCX Fehler", f"Fehler beim Lesen der DOCX-Datei:\n{e}"); print(traceback.format_exc()); return None

def extract_text_from_pdf(filepath):
    """Extracts text from a .pdf file. Unreadable pages are replaced by a placeholder."""
    if not HAS_PYPDF2: messagebox.showerror("Fehler", "'PyPDF2' ist nicht installiert."); return None
    try:
        full_text = []; reader = PdfReader(filepath)
        if reader.is_encrypted:
             try: reader.decrypt('')
             except Exception as decrypt_err: print(f"PDF Decryption failed: {decrypt_err}"); messagebox.showerror("PDF Fehler", "PDF ist verschlüsselt."); return None
        for page in reader.pages:
            try:
                page_text = page.extract_text()
                if page_text: full_text.append(page_text)
            except Exception as e_page: print(f"Warning: Could not extract text from a PDF page: {e_page}"); full_text.append(UNREADABLE_PAGE)
        if not full_text: messagebox.showwarning("PDF Inhalt", "Konnte keinen Text aus PDF extrahieren."); return None
        return '\n\n'.join(full_text)
    except Exception as e: messagebox.showerror("PDF Fehler", f"Fehler beim Lesen der PDF-Datei:\n{e}"); print(traceback.format_exc()); return None

def extract_text(filepath):
    """Dispatches on the file extension. Unknown types are tried as plain text."""
    file_ext = os.path.splitext(filepath)[1].lower()
    if file_ext == ".docx": return extract_text_from_docx(filepath)
    if file_ext == ".pdf": return extract_text_from_pdf(filepath)
    if file_ext != ".txt": print(f"Unknown file type '{file_ext}', trying as text...")
    return read_text_file(filepath)


class TextDialog(tk.Toplevel):
    """
    Paste or type a text, or load it from a .txt file.

    "Text verwenden" hands the trimmed text to on_apply; closing the dialog
    otherwise leaves the reader's text untouched.
    """
    def __init__(self, parent, initial_text, on_apply):
        super().__init__(parent)
        self.on_apply = on_apply
        self.title("Text hinzufügen")
        self.geometry("640x420")
        self.protocol("WM_DELETE_WINDOW", self.close_dialog)

        frame = ttk.Frame(self, padding="15"); frame.pack(expand=True, fill="both")
        ttk.Label(frame, text="Text unten einfügen oder eine .txt-Datei laden.").pack(anchor="w")
        self.text_widget = tk.Text(frame, wrap="word", height=14, undo=True); self.text_widget.pack(expand=True, fill="both", pady=(10, 10))
        self.text_widget.insert("1.0", initial_text or "")

        button_frame = ttk.Frame(frame); button_frame.pack(fill="x")
        ttk.Button(button_frame, text="Datei laden...", command=self.load_file).pack(side="left")
        ttk.Label(button_frame, text="Unterstützt: .txt", foreground="grey").pack(side="left", padx=10)
        ttk.Button(button_frame, text="Text verwenden", command=self.apply_text).pack(side="right")
        ttk.Button(button_frame, text="Schließen", command=self.close_dialog).pack(side="right", padx=(0, 5))

        self.bind("<Escape>", lambda e: self.close_dialog())
        self.text_widget.focus_set(); self.grab_set()

    def load_file(self):
        """Replaces the draft with the contents of a .txt file."""
        filepath = filedialog.askopenfilename(title="Textdatei öffnen", filetypes=[("Textdateien", "*.txt"), ("Alle Dateien", "*.*")], parent=self)
        if not filepath: return
        try: content = read_text_file(filepath)
        except (OSError, UnicodeError) as e: messagebox.showerror("Fehler Dateizugriff", f"Datei konnte nicht gelesen werden:\n{e}", parent=self); return
        self.text_widget.delete("1.0", tk.END); self.text_widget.insert("1.0", content)

    def apply_text(self):
        text = normalize_text(self.text_widget.get("1.0", tk.END))
        self.close_dialog()
        self.on_apply(text)

    def close_dialog(self):
        try: self.grab_release()
        except tk.TclError: pass
        self.destroy()
