from __future__ import annotations

import json
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Any

from ..errors import LoadError
from .decls import BadDecl, Decl, Field, FuncDecl, GenDecl, LoadedPackage, SourceFile, TypeExpr

logger = logging.getLogger(__name__)


def load_package(pkg_path: str, *, work_dir: Path | None = None, go: str = "go") -> LoadedPackage:
    """Load a Go package's declarations together with resolved parameter types.

    Parsing and type-checking are done by a small Go program (stdlib only) that
    is run with `go run`; its JSON output is decoded into immutable declarations.
    `work_dir` is the directory the package path is resolved from (default: cwd).
    """
    work_dir = Path(work_dir or Path.cwd()).resolve()

    with tempfile.TemporaryDirectory(prefix="genmethods-goscan-") as td:
        scan_dir = Path(td)
        (scan_dir / "go.mod").write_text(
            "\n".join(
                [
                    "module genmethods.goscan",
                    "",
                    "go 1.20",
                    "",
                ]
            ),
            encoding="utf-8",
        )
        (scan_dir / "main.go").write_text(_scanner_go_source(), encoding="utf-8")

        cmd = [go, "run", ".", "--pkg", pkg_path, "--dir", str(work_dir)]
        logger.debug("loading package %q: %s", pkg_path, " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(scan_dir),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise LoadError(
                f"Go toolchain not found (`{go}` is missing from PATH). "
                "Install Go and ensure it is available on PATH."
            ) from e
        if proc.returncode != 0:
            raise LoadError(f"unable to load package {pkg_path!r}\n{proc.stderr}")

        try:
            obj = json.loads(proc.stdout)
        except ValueError as e:
            raise LoadError(f"failed to parse go scan output for {pkg_path!r}: {e}\n{proc.stdout}") from e

    pkg = decode_scan(obj)
    logger.debug("loaded package %s (%s): %d files", pkg.name, pkg.path, len(pkg.files))
    return pkg


def decode_scan(obj: Any) -> LoadedPackage:
    """Convert the scanner's JSON object into a `LoadedPackage`."""
    if not isinstance(obj, dict):
        raise LoadError("go scan output must be a JSON object")
    name = obj.get("name")
    path = obj.get("path")
    if not isinstance(name, str) or not name:
        raise LoadError("go scan output is missing the package name")
    if not isinstance(path, str):
        raise LoadError("go scan output is missing the package path")

    raw_types = obj.get("types") or {}
    if not isinstance(raw_types, dict):
        raise LoadError("go scan output: 'types' must be an object")
    types: dict[int, str] = {}
    for k, v in raw_types.items():
        try:
            pos = int(k)
        except ValueError as e:
            raise LoadError(f"go scan output: invalid type position {k!r}") from e
        if not isinstance(v, str):
            raise LoadError(f"go scan output: invalid type at position {k}")
        types[pos] = v

    files: list[SourceFile] = []
    for f in obj.get("files") or []:
        if not isinstance(f, dict) or not isinstance(f.get("path"), str):
            raise LoadError("go scan output: invalid file entry")
        decls = tuple(_decode_decl(d, file_path=f["path"]) for d in f.get("decls") or [])
        files.append(SourceFile(path=f["path"], decls=decls))

    return LoadedPackage(name=name, path=path, files=tuple(files), types=types)


def _decode_decl(d: Any, *, file_path: str) -> Decl:
    if not isinstance(d, dict):
        raise LoadError(f"{file_path}: invalid declaration entry")
    kind = d.get("kind")
    pos = d.get("pos", 0)
    if kind == "gen":
        return GenDecl(tok=str(d.get("tok", "")), pos=pos)
    if kind != "func":
        return BadDecl(kind=str(kind), pos=pos)

    name = d.get("name")
    if not isinstance(name, str) or not name:
        raise LoadError(f"{file_path}: function declaration without a name")
    doc = d.get("doc")
    if doc is not None:
        if not isinstance(doc, list) or not all(isinstance(c, str) for c in doc):
            raise LoadError(f"{file_path}: func {name}: invalid doc comment")
        doc = tuple(doc)
    recv = d.get("recv")
    results = d.get("results")
    return FuncDecl(
        name=name,
        params=_decode_fields(d.get("params") or [], where=f"{file_path}: func {name}"),
        results=None if results is None else _decode_fields(results, where=f"{file_path}: func {name}"),
        doc=doc,
        recv=None if recv is None else _decode_fields(recv, where=f"{file_path}: func {name}"),
        type_params=_decode_fields(d.get("type_params") or [], where=f"{file_path}: func {name}"),
        pos=pos,
    )


def _decode_fields(items: Any, *, where: str) -> tuple[Field, ...]:
    if not isinstance(items, list):
        raise LoadError(f"{where}: field list must be an array")
    out: list[Field] = []
    for item in items:
        if not isinstance(item, dict):
            raise LoadError(f"{where}: invalid field entry")
        names = item.get("names") or []
        t = item.get("type")
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise LoadError(f"{where}: invalid field names")
        if not isinstance(t, dict) or not isinstance(t.get("text"), str) or not isinstance(t.get("pos"), int):
            raise LoadError(f"{where}: invalid field type")
        out.append(Field(names=tuple(names), type=TypeExpr(text=t["text"], pos=t["pos"])))
    return tuple(out)


def _scanner_go_source() -> str:
    # Keep this file stdlib-only so `go run` doesn't need network access.
    return r'''
package main

import (
	"bytes"
	"encoding/json"
	"flag"
	"fmt"
	"go/ast"
	"go/importer"
	"go/parser"
	"go/token"
	"go/types"
	"os"
	"os/exec"
	"path/filepath"
	"sort"
	"strconv"
	"strings"
)

type goListPkg struct {
	ImportPath string
	Name       string
	Dir        string
	GoFiles    []string
	CgoFiles   []string
}

type outType struct {
	Text string `json:"text"`
	Pos  int    `json:"pos"`
}

type outField struct {
	Names []string `json:"names"`
	Type  outType  `json:"type"`
}

type outDecl struct {
	Kind       string     `json:"kind"`
	Pos        int        `json:"pos"`
	Name       string     `json:"name,omitempty"`
	Tok        string     `json:"tok,omitempty"`
	Doc        []string   `json:"doc,omitempty"`
	Recv       []outField `json:"recv,omitempty"`
	TypeParams []outField `json:"type_params,omitempty"`
	Params     []outField `json:"params,omitempty"`
	Results    []outField `json:"results,omitempty"`
}

type outFile struct {
	Path  string    `json:"path"`
	Decls []outDecl `json:"decls"`
}

type outPkg struct {
	Name  string            `json:"name"`
	Path  string            `json:"path"`
	Files []outFile         `json:"files"`
	Types map[string]string `json:"types"`
}

func fail(format string, args ...interface{}) {
	fmt.Fprintf(os.Stderr, format+"\n", args...)
	os.Exit(1)
}

func main() {
	var pkgPath, workDir string
	flag.StringVar(&pkgPath, "pkg", "", "package path to load")
	flag.StringVar(&workDir, "dir", "", "directory to resolve the package from")
	flag.Parse()

	if pkgPath == "" {
		fmt.Fprintln(os.Stderr, "missing --pkg")
		os.Exit(2)
	}
	if workDir != "" {
		if err := os.Chdir(workDir); err != nil {
			fail("chdir: %v", err)
		}
	}

	p, err := listPkg(pkgPath)
	if err != nil {
		fail("%v", err)
	}

	fset := token.NewFileSet()
	// Files with `import "C"` are listed under CgoFiles; they hold declarations too.
	srcFiles := append(append([]string{}, p.GoFiles...), p.CgoFiles...)
	sort.Strings(srcFiles)
	files := make([]*ast.File, 0, len(srcFiles))
	for _, fn := range srcFiles {
		af, err := parser.ParseFile(fset, filepath.Join(p.Dir, fn), nil, parser.ParseComments)
		if err != nil {
			fail("%v", err)
		}
		files = append(files, af)
	}

	info := &types.Info{Types: map[ast.Expr]types.TypeAndValue{}}
	var typeErrs []string
	conf := types.Config{
		Importer:    importer.ForCompiler(fset, "source", nil),
		FakeImportC: true,
		Error: func(err error) {
			typeErrs = append(typeErrs, err.Error())
		},
	}
	conf.Check(p.ImportPath, fset, files, info)
	if len(typeErrs) > 0 {
		fail("type-checking %s failed:\n%s", p.ImportPath, strings.Join(typeErrs, "\n"))
	}

	out := outPkg{
		Name:  p.Name,
		Path:  p.ImportPath,
		Files: make([]outFile, 0, len(files)),
		Types: map[string]string{},
	}
	for _, af := range files {
		of := outFile{
			Path:  fset.Position(af.FileStart).Filename,
			Decls: make([]outDecl, 0, len(af.Decls)),
		}
		for _, decl := range af.Decls {
			of.Decls = append(of.Decls, convertDecl(decl, info, out.Types))
		}
		out.Files = append(out.Files, of)
	}

	enc := json.NewEncoder(os.Stdout)
	enc.SetEscapeHTML(false)
	if err := enc.Encode(out); err != nil {
		fail("encode: %v", err)
	}
}

func listPkg(pkgPath string) (*goListPkg, error) {
	cmd := exec.Command("go", "list", "-json", "--", pkgPath)
	var stdout, stderr bytes.Buffer
	cmd.Stdout = &stdout
	cmd.Stderr = &stderr
	if err := cmd.Run(); err != nil {
		return nil, fmt.Errorf("go list failed: %v\n%s", err, stderr.String())
	}
	var p goListPkg
	if err := json.Unmarshal(stdout.Bytes(), &p); err != nil {
		return nil, fmt.Errorf("failed to decode go list json: %v", err)
	}
	if len(p.GoFiles)+len(p.CgoFiles) == 0 {
		return nil, fmt.Errorf("no Go files in package %q", pkgPath)
	}
	return &p, nil
}

func convertDecl(decl ast.Decl, info *types.Info, typesOut map[string]string) outDecl {
	switch d := decl.(type) {
	case *ast.GenDecl:
		return outDecl{Kind: "gen", Pos: int(d.Pos()), Tok: d.Tok.String()}
	case *ast.FuncDecl:
		od := outDecl{
			Kind:    "func",
			Pos:     int(d.Pos()),
			Name:    d.Name.Name,
			Recv:    convertFields(d.Recv, info, typesOut),
			Params:  convertFields(d.Type.Params, info, typesOut),
			Results: convertFields(d.Type.Results, info, typesOut),
		}
		od.TypeParams = convertFields(d.Type.TypeParams, info, typesOut)
		if d.Doc != nil {
			for _, c := range d.Doc.List {
				od.Doc = append(od.Doc, c.Text)
			}
		}
		return od
	case *ast.BadDecl:
		return outDecl{Kind: "bad", Pos: int(d.Pos())}
	default:
		return outDecl{Kind: fmt.Sprintf("%T", decl), Pos: int(decl.Pos())}
	}
}

func convertFields(fl *ast.FieldList, info *types.Info, typesOut map[string]string) []outField {
	if fl == nil {
		return nil
	}
	out := make([]outField, 0, len(fl.List))
	for _, f := range fl.List {
		names := make([]string, 0, len(f.Names))
		for _, n := range f.Names {
			names = append(names, n.Name)
		}
		pos := int(f.Type.Pos())
		if tv, ok := info.Types[f.Type]; ok && tv.Type != nil {
			typesOut[strconv.Itoa(pos)] = types.TypeString(tv.Type, nil)
		}
		out = append(out, outField{
			Names: names,
			Type:  outType{Text: types.ExprString(f.Type), Pos: pos},
		})
	}
	return out
}
'''
