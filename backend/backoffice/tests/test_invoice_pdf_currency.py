from django.test import SimpleTestCase, override_settings

from ..invoice_pdf import FALLBACK_REGULAR, FONT_REGULAR, get_currency_prefix, get_pdf_fonts


class CurrencyPrefixTests(SimpleTestCase):
    @override_settings(BACKOFFICE_CURRENCY_SYMBOL="₹", BACKOFFICE_CURRENCY_CODE="INR")
    def test_helvetica_falls_back_to_currency_code(self):
        self.assertEqual(get_currency_prefix(FALLBACK_REGULAR), "INR ")

    @override_settings(BACKOFFICE_CURRENCY_SYMBOL="₹")
    def test_unicode_font_keeps_symbol(self):
        self.assertEqual(get_currency_prefix(FONT_REGULAR), "₹")

    @override_settings(BACKOFFICE_CURRENCY_SYMBOL="$")
    def test_encodable_symbol_is_kept_for_helvetica(self):
        self.assertEqual(get_currency_prefix(FALLBACK_REGULAR), "$")

    @override_settings(BACKOFFICE_FONT_DIR="/nonexistent/fonts")
    def test_missing_fonts_use_helvetica(self):
        regular, bold = get_pdf_fonts()
        if regular == FONT_REGULAR:
            self.skipTest("DejaVu fonts were registered by an earlier test")
        self.assertEqual((regular, bold), ("Helvetica", "Helvetica-Bold"))
