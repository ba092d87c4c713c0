from binascii import unhexlify
from unittest import TestCase

from parameterized import parameterized

from aeskw import AESKeyWrap, AES_128, AES_192, AES_256, DEFAULT_IV, aes_kw_128, aes_kw_192, aes_kw_256
from aeskw.exception import InvalidIV, ConstructionError, InvalidKeyLength, EmptyKey, InvalidKEKSize, \
    InvalidCiphertextLength, NoBlocks, IntegrityCheckFailed, UnwrapError, InputDataError
from aeskw.tests.testcase import TestCaseBase, CountingCipher

KEK_128 = '000102030405060708090A0B0C0D0E0F'
KEK_192 = '000102030405060708090A0B0C0D0E0F1011121314151617'
KEK_256 = '000102030405060708090A0B0C0D0E0F101112131415161718191A1B1C1D1E1F'
KEY_128 = '00112233445566778899AABBCCDDEEFF'
KEY_192 = '00112233445566778899AABBCCDDEEFF0001020304050607'
KEY_256 = '00112233445566778899AABBCCDDEEFF000102030405060708090A0B0C0D0E0F'

# RFC 3394 section 4
RFC3394_VECTORS = [
    ('4.1', AES_128, KEK_128, KEY_128, '1FA68B0A8112B447AEF34BD8FB5A7B829D3E862371D2CFE5'),
    ('4.2', AES_192, KEK_192, KEY_128, '96778B25AE6CA435F92B5B97C050AED2468AB8A17AD84E5D'),
    ('4.3', AES_256, KEK_256, KEY_128, '64E8C3F9CE0F5BA263E9777905818A2A93C8191E7D6E8AE7'),
    ('4.4', AES_192, KEK_192, KEY_192, '031D33264E15D33268F24EC260743EDCE1C6C7DDEE725A936BA814915C6762D2'),
    ('4.5', AES_256, KEK_256, KEY_192, 'A8F9BC1612C68B3FF6E6F4FBE30E71E4769C8B80A32CB8958CD5D17D6B254DA1'),
    ('4.6', AES_256, KEK_256, KEY_256,
     '28C9F404C4B810F4CBCCB35CFB87F8263F5786E2D80ED326CBC7F0E71A99F43BFB988B9B7A02DD21'),
]

# RFC 5649 section 6
RFC5649_KEK = '5840df6e29b02af1ab493b705bf16ea1ae8338f4dcc176a8'
RFC5649_VECTORS = [
    ('20_octets', 'c37b7e6492584340bed12207808941155068f738',
     '138bdeaa9b8fa7fc61f97742e72248ee5ae6ae5360d1ae6a5f54f373fa543b6a'),
    ('7_octets', '466f7250617369', 'afbeb0f07dfbf5419200f2ccb50bb24f'),
]


class AESKeyWrapTestCase(TestCaseBase, TestCase):

    @parameterized.expand(RFC3394_VECTORS)
    def test_rfc3394_wrap(self, _, variant, kek, key, ciphertext):
        self.assertEqual(unhexlify(ciphertext), AESKeyWrap(variant).wrap(unhexlify(key), unhexlify(kek)))

    @parameterized.expand(RFC3394_VECTORS)
    def test_rfc3394_unwrap(self, _, variant, kek, key, ciphertext):
        self.assertEqual(unhexlify(key), AESKeyWrap(variant).unwrap(unhexlify(ciphertext), unhexlify(kek)))

    @parameterized.expand(RFC5649_VECTORS)
    def test_rfc5649_wrap_pad(self, _, key, ciphertext):
        self.assertEqual(unhexlify(ciphertext), AESKeyWrap(AES_192).wrap_pad(unhexlify(key), unhexlify(RFC5649_KEK)))

    @parameterized.expand(RFC5649_VECTORS)
    def test_rfc5649_unwrap_pad(self, _, key, ciphertext):
        self.assertEqual(unhexlify(key), AESKeyWrap(AES_192).unwrap_pad(unhexlify(ciphertext),
                                                                         unhexlify(RFC5649_KEK)))

    def test_seven_byte_key_wraps_to_one_cipher_block(self):
        kw = AESKeyWrap(AES_192)
        ciphertext = kw.wrap_pad(unhexlify('466f7250617369'), unhexlify(RFC5649_KEK))
        self.assertEqual(16, len(ciphertext))
        self.assertEqual(b'ForPasi', kw.unwrap_pad(ciphertext, unhexlify(RFC5649_KEK)))

    def test_wrap_round_trip(self):
        for variant, kek in ((AES_128, self.KEK_128), (AES_192, self.KEK_192), (AES_256, self.KEK_256)):
            kw = AESKeyWrap(variant)
            for length in range(16, 129, 8):
                key = self.random_bytes(length)
                ciphertext = kw.wrap(key, kek)
                self.assertEqual(length + 8, len(ciphertext))
                self.assertEqual(key, kw.unwrap(ciphertext, kek))

    def test_wrap_pad_round_trip(self):
        for variant, kek in ((AES_128, self.KEK_128), (AES_192, self.KEK_192), (AES_256, self.KEK_256)):
            kw = AESKeyWrap(variant)
            for length in range(1, 70):
                key = self.random_bytes(length)
                ciphertext = kw.wrap_pad(key, kek)
                padded_length = 8 * ((length + 7) // 8)
                self.assertEqual(padded_length + 8, len(ciphertext))
                self.assertEqual(key, kw.unwrap_pad(ciphertext, kek))

    def test_deterministic(self):
        kw = AESKeyWrap(AES_256)
        key = self.random_bytes(32)
        self.assertEqual(kw.wrap(key, self.KEK_256), kw.wrap(key, self.KEK_256))
        self.assertEqual(kw.wrap_pad(key[:13], self.KEK_256), kw.wrap_pad(key[:13], self.KEK_256))

    def test_padded_and_unpadded_ciphertexts_differ(self):
        kw = AESKeyWrap(AES_128)
        key = unhexlify(KEY_128)
        self.assertNotEqual(kw.wrap(key, self.KEK_128), kw.wrap_pad(key, self.KEK_128))
        with self.assertRaises(IntegrityCheckFailed):
            kw.unwrap(kw.wrap_pad(key, self.KEK_128), self.KEK_128)
        with self.assertRaises(IntegrityCheckFailed):
            kw.unwrap_pad(kw.wrap(key, self.KEK_128), self.KEK_128)

    def test_unwrap_tampered(self):
        kw = AESKeyWrap(AES_128)
        ciphertext = kw.wrap(self.random_bytes(24), self.KEK_128)
        for bit in range(len(ciphertext) * 8):
            tampered = bytearray(ciphertext)
            tampered[bit // 8] ^= 1 << (bit % 8)
            with self.assertRaises(IntegrityCheckFailed):
                kw.unwrap(bytes(tampered), self.KEK_128)

    def test_unwrap_pad_tampered(self):
        kw = AESKeyWrap(AES_256)
        for length in (5, 20):
            ciphertext = kw.wrap_pad(self.random_bytes(length), self.KEK_256)
            for bit in range(len(ciphertext) * 8):
                tampered = bytearray(ciphertext)
                tampered[bit // 8] ^= 1 << (bit % 8)
                with self.assertRaises(UnwrapError):
                    kw.unwrap_pad(bytes(tampered), self.KEK_256)

    def test_unwrap_wrong_kek(self):
        kw = AESKeyWrap(AES_128)
        ciphertext = kw.wrap(unhexlify(KEY_128), self.KEK_128)
        with self.assertRaises(IntegrityCheckFailed):
            kw.unwrap(ciphertext, bytes(reversed(self.KEK_128)))

    def test_wrap_short_key(self):
        kw = AESKeyWrap(AES_128)
        for key in (b'', unhexlify('0011223344556677')):
            with self.assertRaises(InvalidKeyLength):
                kw.wrap(key, self.KEK_128)

    def test_wrap_key_not_multiple_of_eight(self):
        with self.assertRaises(InvalidKeyLength):
            AESKeyWrap(AES_128).wrap(self.random_bytes(17), self.KEK_128)

    def test_wrap_pad_empty_key(self):
        with self.assertRaises(EmptyKey):
            AESKeyWrap(AES_128).wrap_pad(b'', self.KEK_128)

    def test_wrap_pad_key_too_long_for_mli(self):

        class _LongKey(bytes):
            # Only the length is looked at before the key is rejected.
            def __len__(self):
                return 2**32

        cipher = CountingCipher()
        with self.assertRaises(InvalidKeyLength):
            AESKeyWrap(AES_128, cipher=cipher).wrap_pad(_LongKey(b'\x01'), self.KEK_128)
        self.assertEqual([], cipher.calls)

    def test_wrap_pad_one_byte_key(self):
        kw = AESKeyWrap(AES_128)
        ciphertext = kw.wrap_pad(b'\x42', self.KEK_128)
        self.assertEqual(16, len(ciphertext))
        self.assertEqual(b'\x42', kw.unwrap_pad(ciphertext, self.KEK_128))

    def test_kek_size(self):
        kw = AESKeyWrap(AES_128)
        key = unhexlify(KEY_128)
        for kek in (b'', unhexlify('0011223344556677'), self.KEK_192, self.KEK_256):
            with self.assertRaises(InvalidKEKSize):
                kw.wrap(key, kek)
            with self.assertRaises(InvalidKEKSize):
                kw.wrap_pad(key, kek)
            with self.assertRaises(InvalidKEKSize):
                kw.unwrap(key + key, kek)
            with self.assertRaises(InvalidKEKSize):
                kw.unwrap_pad(key + key, kek)

    def test_cross_kek_size_never_reaches_cipher(self):
        ciphertext = AESKeyWrap(AES_128).wrap(unhexlify(KEY_128), self.KEK_128)
        cipher = CountingCipher()
        kw = AESKeyWrap(AES_256, cipher=cipher)
        with self.assertRaises(InvalidKEKSize):
            kw.unwrap(ciphertext, self.KEK_128)
        with self.assertRaises(InvalidKEKSize):
            kw.unwrap_pad(ciphertext, self.KEK_128)
        self.assertEqual([], cipher.calls)

    def test_unwrap_invalid_ciphertext_length(self):
        kw = AESKeyWrap(AES_128)
        with self.assertRaises(InvalidCiphertextLength):
            kw.unwrap(b'nope', self.KEK_128)
        with self.assertRaises(InvalidCiphertextLength):
            kw.unwrap_pad(b'nope', self.KEK_128)

    def test_unwrap_no_blocks(self):
        kw = AESKeyWrap(AES_128)
        for ciphertext in (b'', b'\xa6' * 8):
            with self.assertRaises(NoBlocks):
                kw.unwrap(ciphertext, self.KEK_128)
            with self.assertRaises(NoBlocks):
                kw.unwrap_pad(ciphertext, self.KEK_128)

    def test_input_errors_are_distinguishable(self):
        self.assertTrue(issubclass(NoBlocks, InputDataError))
        self.assertFalse(issubclass(IntegrityCheckFailed, InputDataError))
        self.assertFalse(issubclass(InvalidKeyLength, UnwrapError))


class CustomIVTestCase(TestCaseBase, TestCase):

    IV = unhexlify('1122334466778899')
    KEY = b'PasswordPassword'
    KEK = unhexlify('00112233445566778899aabbccddeeff')

    def test_round_trip(self):
        kw = AESKeyWrap(AES_128, iv=self.IV)
        ciphertext = kw.wrap(self.KEY, self.KEK)
        self.assertEqual(self.KEY, kw.unwrap(ciphertext, self.KEK))

    def test_iv_mismatch(self):
        ciphertext = AESKeyWrap(AES_128, iv=self.IV).wrap(self.KEY, self.KEK)
        with self.assertRaises(IntegrityCheckFailed):
            AESKeyWrap(AES_128).unwrap(ciphertext, self.KEK)

    def test_iv_does_not_affect_padding_variant(self):
        key = b'short key'
        self.assertEqual(
            AESKeyWrap(AES_128, iv=self.IV).wrap_pad(key, self.KEK),
            AESKeyWrap(AES_128).wrap_pad(key, self.KEK))

    def test_invalid_iv(self):
        for iv in (b'', b'\xa6' * 7, b'\xa6' * 9, b'\xa6' * 16):
            with self.assertRaises(InvalidIV):
                AESKeyWrap(AES_128, iv=iv)

    def test_invalid_iv_is_construction_error(self):
        with self.assertRaises(ConstructionError):
            aes_kw_256(iv=b'1234')


class AESKeyWrapConstructionTestCase(TestCaseBase, TestCase):

    def test_convenience_constructors(self):
        self.assertEqual(AES_128, aes_kw_128().variant)
        self.assertEqual(AES_192, aes_kw_192().variant)
        self.assertEqual(AES_256, aes_kw_256().variant)
        self.assertEqual(DEFAULT_IV, aes_kw_256().iv)

    def test_cipher_block_size_mismatch(self):
        with self.assertRaises(ConstructionError):
            AESKeyWrap(AES_128, cipher=CountingCipher(block_size=8))

    def test_repr(self):
        self.assertEqual("AESKeyWrap(variant=aes192, cipher=AESECBCipher(identifier='AES-192-ECB'))",
                         repr(AESKeyWrap(AES_192)))
