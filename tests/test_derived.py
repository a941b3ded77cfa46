import unittest
import torch
import torch_weld_einsum as weld_einsum
import numpy

class TestDerived(unittest.TestCase):
    def setUp(self):
        self.device = torch.device('cpu')
        self.generator = torch.manual_seed(123)

    def rand(self, size):
        x = torch.empty(size, device=self.device, dtype=torch.float64)
        x.uniform_(-10., 10., generator=self.generator)
        return x

    def test_tensordot(self):
        A, B, C, D, E, F = 2, 3, 5, 7, 11, 13
        for i, (x_size, y_size, inner_dims) in enumerate([
                ((A, B, C, D), (C, D, E, F), 2),
                ((A, B, C, D), (D, E, F), 1),
                ((A, B, C, D), (E, F), 0),
        ]):
            with self.subTest(i):
                x = self.rand(x_size)
                y = self.rand(y_size)
                out = weld_einsum.tensordot(x, y, inner_dims)
                torch_out = torch.tensordot(x, y, inner_dims)
                numpy.testing.assert_allclose(out, torch_out, rtol=1e-7)

    def test_tensordot_too_many_dims(self):
        x = self.rand((2, 3))
        y = self.rand((3,))
        for ndim in [2, 3, -1]:
            with self.subTest(ndim):
                with self.assertRaises(ValueError) as cm:
                    weld_einsum.tensordot(x, y, ndim)
                self.assertNotIsInstance(cm.exception, weld_einsum.MalformedEquationError)

    def test_tensordot_full_contraction(self):
        x = self.rand((2, 3))
        y = self.rand((2, 3))
        out = weld_einsum.tensordot(x, y, 2)
        self.assertEqual(out.size(), (1,))
        numpy.testing.assert_allclose(out, torch.tensordot(x, y, 2).reshape(1))

    def test_inner(self):
        A, B, C, D = 2, 3, 5, 7
        for i, (x_size, y_size) in enumerate([
                ((A, B), (C, D, B)),
                ((A, B), (C, B)),
                ((B,), (A, B)),
        ]):
            with self.subTest(i):
                x = self.rand(x_size)
                y = self.rand(y_size)
                out = weld_einsum.inner(x, y)
                torch_out = torch.inner(x, y)
                numpy.testing.assert_allclose(out, torch_out, rtol=1e-7)

    def test_inner_scalar(self):
        with self.assertRaises(ValueError):
            weld_einsum.inner(torch.tensor(1.0), self.rand((3,)))

    def test_dot(self):
        x = self.rand((5,))
        y = self.rand((5,))
        out = weld_einsum.dot(x, y)
        self.assertEqual(out.size(), (1,))
        numpy.testing.assert_allclose(out, torch.dot(x, y).reshape(1))

    def test_mm(self):
        x = self.rand((2, 3))
        y = self.rand((3, 5))
        numpy.testing.assert_allclose(weld_einsum.mm(x, y), torch.mm(x, y))

    def test_bmm(self):
        x = self.rand((4, 2, 3))
        y = self.rand((4, 3, 5))
        numpy.testing.assert_allclose(weld_einsum.bmm(x, y), torch.bmm(x, y))

    def test_mv(self):
        x = self.rand((2, 3))
        y = self.rand((3,))
        numpy.testing.assert_allclose(weld_einsum.mv(x, y), torch.mv(x, y))

    def test_outer(self):
        x = self.rand((3,))
        y = self.rand((4,))
        numpy.testing.assert_allclose(weld_einsum.outer(x, y), torch.outer(x, y))

    def test_trace(self):
        x = self.rand((4, 4))
        numpy.testing.assert_allclose(weld_einsum.trace(x), torch.trace(x).reshape(1))

    def test_diagonal(self):
        x = self.rand((4, 4))
        numpy.testing.assert_allclose(weld_einsum.diagonal(x), torch.diagonal(x))

    def test_transpose(self):
        x = self.rand((2, 3))
        numpy.testing.assert_allclose(weld_einsum.transpose(x), x.t())

    def test_options_are_passed_through(self):
        compiler = weld_einsum.EinsumCompiler()
        engine = weld_einsum.TorchEngine()
        x = self.rand((2, 3))
        y = self.rand((3, 5))
        out = weld_einsum.mm(x, y, compiler=compiler, engine=engine)
        numpy.testing.assert_allclose(out, torch.mm(x, y))

    def test_too_many_axes(self):
        x = torch.ones((1,) * 14, dtype=torch.float64)
        with self.assertRaises(ValueError):
            weld_einsum.tensordot(x, x, 0)

if __name__ == '__main__':
    unittest.main()
